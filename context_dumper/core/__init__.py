# context_dumper/core/__init__.py
