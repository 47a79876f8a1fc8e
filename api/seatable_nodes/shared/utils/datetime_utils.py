"""
Utilidades para el cursor de tiempo del trigger.
"""
from datetime import datetime, timedelta, timezone

from seatable_nodes.shared.constants.seatable_constants import CURSOR_DATETIME_FORMAT


class DateTimeUtils:
    """Clase de utilidades para operaciones con fechas y horas."""

    @staticmethod
    def now_utc() -> datetime:
        """
        Obtiene la fecha y hora actual en UTC.

        Returns:
            datetime: Fecha y hora actual en UTC
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def to_cursor_string(dt: datetime) -> str:
        """
        Serializa un datetime como lo hace SeaTable en _ctime/_mtime.

        Ej: 2021-03-04T10:20:30.123+00:00. El formato ordena
        lexicograficamente, por eso el cursor se compara como string.

        Args:
            dt: Objeto datetime (naive se asume UTC)

        Returns:
            str: Timestamp con milisegundos y offset +00:00
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)
        millis = dt.microsecond // 1000
        return f"{dt.strftime(CURSOR_DATETIME_FORMAT)}.{millis:03d}+00:00"

    @staticmethod
    def minutes_before(dt: datetime, minutes: int) -> datetime:
        """Resta minutos a un datetime."""
        return dt - timedelta(minutes=minutes)
