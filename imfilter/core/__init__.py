"""Configuration, errors and the repetition driver."""
