# academy/utils/__init__.py
