"""Crypto market rank & gas price Telegram bot."""
