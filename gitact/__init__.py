"""gitact: execute validated repository action intents against GitHub."""

__version__ = "0.1.0"
