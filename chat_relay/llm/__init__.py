"""Provider access package.

Architectural role:
    Provides provider configuration, payload construction/reply extraction, and
    the HTTP transport used by `chat_relay.core.relay`.

Module split:
    - `provider_config`: provider table and environment-driven settings.
    - `adapters`: per-request-shape payload builders and reply extractors.
    - `client`: `requests` transport and upstream error mapping.
"""
