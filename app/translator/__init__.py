# -*- coding: utf-8 -*-
from .deepl_client import DeepLTranslator

__all__ = ["DeepLTranslator"]
