# Copyright 2025 Loopper-AI
# Utility modules

from .path_utils import join_path

__all__ = ["join_path"]
