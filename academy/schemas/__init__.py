# academy/schemas/__init__.py
