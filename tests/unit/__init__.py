"""
Unit tests for Gemini Gateway.

Test individual components in isolation:
- Credential pool transitions and store-backed pool
- Canonicalization and response cache
- Gemini client, prompts and reply validation
- Upstream client and dispatcher
- Backing store adapters
"""
