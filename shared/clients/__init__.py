"""
Remote recognition service clients.

Usage:
    from shared.clients import VisualRecognitionClient
    client = VisualRecognitionClient(username="...", password="...")
    result = await client.classify(open("cat.jpg", "rb"), ["Test01_1000695352"])
"""
from shared.clients.base import RemoteServiceClient
from shared.clients.visual_recognition import VisualRecognitionClient
from shared.clients.alchemy_vision import AlchemyVisionClient

__all__ = [
    "RemoteServiceClient",
    "VisualRecognitionClient",
    "AlchemyVisionClient",
]
