"""GUI дашборда (PySide6)"""
