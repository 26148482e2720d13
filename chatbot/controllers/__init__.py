"""Controllers driving a chatbot session from user input."""
