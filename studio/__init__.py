"""
Virtual Studio Lens

Plans a ten-shot editorial campaign from a model photo and a product photo,
then renders on-demand previews per shot via Gemini.
"""

__version__ = "0.1.0"
