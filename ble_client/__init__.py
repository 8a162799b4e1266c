"""Gateway BLE HumiTemp → Sense Ingress API.

Estructura:
- core/        → dominio, decodificación binaria, construcción de eventos
- auth/        → token (JWT): almacén + registro
- transports/  → escáner BLE (bleak) y cliente HTTP (httpx)
- pipeline/    → filtro → decode → eventos → envío, por anuncio
- main.py      → CLI y ciclo de vida del proceso
"""

__version__ = "0.1.0"
