"""Core relay package.

Composition:
    - `relay`: `ChatRelay`, the validate/log/call/extract sequence.
    - `errors`: relay error taxonomy mapped to HTTP responses by `chat_relay.api`.
"""
