"""Phone number sign-in: Ding one-time codes exchanged for Firebase custom tokens."""

__version__ = "1.0.0"
