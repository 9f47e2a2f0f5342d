# -*- coding: utf-8 -*-
from .vision_client import VisionOCRClient

__all__ = ["VisionOCRClient"]
