#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Controller layer between the editor page and the core services
"""

from .base_controller import BaseController
from .slice_controller import SliceController
from .export_controller import ExportController, ExportState

__all__ = ['BaseController', 'SliceController', 'ExportController', 'ExportState']
