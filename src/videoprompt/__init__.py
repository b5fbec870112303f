"""Turn a style video and a target video into a generation prompt via Gemini."""
