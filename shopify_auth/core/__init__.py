"""Configuration, logging, errors and HMAC primitives."""
