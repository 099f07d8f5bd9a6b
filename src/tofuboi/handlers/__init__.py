"""Telegram-facing handlers: message sending and the transcript request flow."""
