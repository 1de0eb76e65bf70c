# academy/services/__init__.py
