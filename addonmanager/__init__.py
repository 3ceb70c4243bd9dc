# addonmanager/__init__.py
__version__ = "1.5.1"
