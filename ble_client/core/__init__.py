"""Core module - Modelo y transformación de lecturas HumiTemp.

Estructura:
- domain/    → Anuncios, registros, eventos y credencial
- decoding/  → Layout binario del payload de fabricante
- pipeline/  → Construcción de eventos

Sin dependencias de radio ni de red.
"""
