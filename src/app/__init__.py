"""App — CLI и периодический запуск ребалансера."""
