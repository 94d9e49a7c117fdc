"""
Ядро дашборда обогащения Instagram-профилей.

Не зависит от Qt: модели задач, тарифы узлов, валидация формы,
расчёт прогресса и состояние опроса статуса.
"""
