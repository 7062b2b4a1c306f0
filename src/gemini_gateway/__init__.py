"""
Gemini Gateway.

Mediates access to the Gemini generateContent API on behalf of many
concurrent callers:
- Text extraction from images (OCR)
- Color name to hex code lookup, cached by canonical label

Architecture: FastAPI dispatcher + rotating API key pool + Redis-backed
state and response cache
"""

__version__ = "0.1.0"
