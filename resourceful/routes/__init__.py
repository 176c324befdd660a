"""
Resourceful — Built-in Routes
==============================

Routes the application factory adds next to the resource routes:
    - health.py:  GET /health   (service status and registered resources)

Resource routes themselves are generated by resourceful.api.API.
"""
