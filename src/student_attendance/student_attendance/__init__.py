"""Student attendance package.

Organized by feature modules (schedules, attendance, directory, submissions,
mail) with thin Flask controllers over service/repository layers.
"""
