"""
Diagnósticos de conversión y resultado final.

Los problemas recuperables no interrumpen la conversión: se registran en una
DiagnosticList que se pasa por referencia a todos los componentes.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple



class ErrorLevel(str, Enum):
    """Severidad de un diagnóstico"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """Un hallazgo de la conversión"""
    level: ErrorLevel
    message: str
    path: Optional[Tuple[str, ...]] = None

    def __str__(self) -> str:
        if self.path:
            return f"[{self.level.value}] {'/'.join(self.path)}: {self.message}"
        return f"[{self.level.value}] {self.message}"


class DiagnosticList:
    """
    Colección ordenada de diagnósticos. Solo admite agregar.
    """

    def __init__(self):
        self._items: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def info(self, message: str, path: Optional[Tuple[str, ...]] = None) -> None:
        self.add(Diagnostic(ErrorLevel.INFO, message, path))

    def warn(self, message: str, path: Optional[Tuple[str, ...]] = None) -> None:
        self.add(Diagnostic(ErrorLevel.WARNING, message, path))

    def error(self, message: str, path: Optional[Tuple[str, ...]] = None) -> None:
        self.add(Diagnostic(ErrorLevel.ERROR, message, path))

    def of_level(self, level: ErrorLevel) -> List[Diagnostic]:
        return [d for d in self._items if d.level == level]

    @property
    def errors(self) -> List[Diagnostic]:
        return self.of_level(ErrorLevel.ERROR)

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.of_level(ErrorLevel.WARNING)

    def has_errors(self) -> bool:
        return any(d.level == ErrorLevel.ERROR for d in self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._items[index]

    def __repr__(self) -> str:
        return f"DiagnosticList({self._items!r})"


class StructuralError(Exception):
    """Falta un bloque obligatorio del documento fuente; la conversión se aborta."""

    def __init__(self, path: Tuple[str, ...]):
        self.path = path
        super().__init__(f"Falta el bloque obligatorio {'/'.join(path)}")


@dataclass
class ConversionResult:
    """Documento convertido (o None si se abortó) y sus diagnósticos"""
    document: Optional[Any]
    diagnostics: DiagnosticList = field(default_factory=DiagnosticList)

    @property
    def is_success(self) -> bool:
        return self.document is not None

    @property
    def has_errors(self) -> bool:
        return self.diagnostics.has_errors()
