from .openai import OpenAISpeechRecognizer, OpenAISpeechSynthesizer

__all__ = ["OpenAISpeechRecognizer", "OpenAISpeechSynthesizer"]
