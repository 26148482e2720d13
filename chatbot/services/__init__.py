"""Services: the chat-completion client and the chatbot orchestrator."""
