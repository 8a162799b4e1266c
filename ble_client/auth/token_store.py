"""Almacén persistente del JWT.

Un único archivo: el contenido completo es el token. Se sobrescribe
en cada registro.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from ..errors import TokenStoreError

logger = logging.getLogger(__name__)


class TokenStore:
    """Lee y escribe el token en un archivo del directorio de usuario."""

    def __init__(self, path: Union[str, Path], mode: int = 0o600):
        self.path = Path(path).expanduser()
        self.mode = mode

    def read(self) -> str:
        """Lee el token.

        Raises:
            TokenStoreError: si el archivo no existe, no se puede leer
                o está vacío, o si el contenido no es ASCII
                (no viajaría en el header Authorization).
        """
        logger.info("[AUTH] Reading jwt file %s", self.path)
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            raise TokenStoreError(f"jwt file not found: {self.path}")
        except OSError as e:
            raise TokenStoreError(f"unable to read jwt file {self.path}: {e}")

        try:
            token = raw.decode("ascii").strip()
        except UnicodeDecodeError:
            raise TokenStoreError(f"jwt file does not hold an ASCII token: {self.path}")

        if not token:
            raise TokenStoreError(f"jwt file is empty: {self.path}")
        return token

    def write(self, token: str) -> None:
        """Persiste el token (sobrescribe).

        Raises:
            TokenStoreError: si el archivo no se puede escribir.
        """
        logger.info("[AUTH] Writing jwt file %s", self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.mode)
            with os.fdopen(fd, "wb") as f:
                f.write(token.encode("utf-8"))
        except OSError as e:
            raise TokenStoreError(f"unable to write jwt file {self.path}: {e}")

    def exists(self) -> bool:
        return self.path.is_file()
