"""
Palettemill Colors Module

Pixel acquisition from images, palette extraction on top of the quantization
engine, and display conversions (hex, HSL).
"""
