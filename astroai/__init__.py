"""
AstroAI backend.

Proxies NASA's public APIs (APOD, Mars rover photos, NeoWs) and a Gemini
chat endpoint for the AstroAI frontend, and resolves a single daily Mars
image through an ordered chain of fallback sources.
"""

__version__ = "1.0.0"
