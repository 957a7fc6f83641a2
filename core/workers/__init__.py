#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Worker threads for background exports
"""

from .export_worker import ExportWorker

__all__ = ['ExportWorker']
