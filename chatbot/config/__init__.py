"""Configuration: settings loaded from the environment and chatbot presets."""
