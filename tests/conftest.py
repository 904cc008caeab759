# tests/conftest.py
"""
Pytest configuration and shared fixtures for the test suite.

The proprietary native component is not available in CI, so native exports
are replaced by Python callables. They receive exactly what ctypes would
pass (bytes, ints, bools and real ctypes pointers) and write into the same
response buffer memory the native side would.
"""
import ctypes
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from acbrlib_nfe import ACBrLibNFe, InitOptions, LowLevelWrapper


def _accepts(ctype: Any, value: Any) -> bool:
    """Mirrors the argument checks ctypes performs against `argtypes`."""
    if ctype is ctypes.c_char_p:
        return value is None or isinstance(value, bytes)
    if ctype is ctypes.c_int:
        return isinstance(value, int)
    if ctype is ctypes.c_bool:
        return isinstance(value, (bool, int))
    return isinstance(value, ctype)


class FakeFunction:
    """Stand-in for a ctypes function pointer returned by `CDLL[name]`."""
    def __init__(self, name: str, handler: Callable[..., int], calls: List[Tuple[str, tuple]]):
        self.name = name
        self.handler = handler
        self.calls = calls
        self.restype = None
        self.argtypes = None

    def __call__(self, *args: Any) -> int:
        argtypes = self.argtypes or []
        if len(args) != len(argtypes):
            raise TypeError(f"this function takes {len(argtypes)} argument(s) ({len(args)} given)")
        for position, (ctype, value) in enumerate(zip(argtypes, args), start=1):
            if not _accepts(ctype, value):
                raise ctypes.ArgumentError(f"argument {position}: wrong type")
        self.calls.append((self.name, args))
        return self.handler(*args)


class FakeNativeLibrary:
    """Registry of fake exports, indexed like a ctypes.CDLL."""
    def __init__(self):
        self.handlers: Dict[str, Callable[..., int]] = {}
        self.calls: List[Tuple[str, tuple]] = []

    def __getitem__(self, name: str) -> FakeFunction:
        if name not in self.handlers:
            raise AttributeError(f"function '{name}' not found")
        return FakeFunction(name, self.handlers[name], self.calls)

    def on(
        self,
        export: str,
        *,
        status: int = 0,
        output: Optional[str] = None,
        reported_length: Optional[int] = None,
    ) -> None:
        """Registers an export returning `status`, optionally writing `output`."""
        def handler(*args: Any) -> int:
            if output is not None:
                write_output(args[-2], args[-1], output, reported_length)
            return status
        self.handlers[export] = handler

    def args_of(self, export: str, index: int = -1) -> tuple:
        """Arguments of the `index`-th call to `export`."""
        return [args for name, args in self.calls if name == export][index]

    def exports_called(self) -> List[str]:
        return [name for name, _ in self.calls]


def write_output(buffer_ptr: Any, length_ptr: Any, text: str, reported: Optional[int] = None) -> None:
    """Writes like the native side: at most capacity bytes, full length reported."""
    data = text.encode("utf-8")
    capacity = length_ptr.contents.value
    ctypes.memmove(buffer_ptr, data, min(len(data), capacity))
    length_ptr.contents.value = len(data) if reported is None else reported


class FakeWrapper(LowLevelWrapper):
    """A LowLevelWrapper whose loaded library is a FakeNativeLibrary."""
    def __init__(self, fake: FakeNativeLibrary, library_path: str = "fake/libacbrnfe64.so"):
        self._fake = fake
        super().__init__(library_path)

    def _load(self, path: str, calling_convention: str) -> FakeNativeLibrary:
        return self._fake


@pytest.fixture
def fake_native() -> FakeNativeLibrary:
    """A fake library where initialization and finalization succeed."""
    fake = FakeNativeLibrary()
    fake.on("NFE_Inicializar")
    fake.on("NFE_Finalizar")
    return fake

@pytest.fixture
def output_writer() -> Callable[..., None]:
    return write_output

@pytest.fixture
def wrapper_factory() -> Callable[[FakeNativeLibrary], FakeWrapper]:
    return FakeWrapper

@pytest.fixture
def make_nfe(fake_native: FakeNativeLibrary) -> Callable[..., ACBrLibNFe]:
    """Builds façades over `fake_native`; all are closed at teardown."""
    created: List[ACBrLibNFe] = []

    def factory(options: Optional[InitOptions] = None) -> ACBrLibNFe:
        if options is None:
            options = InitOptions(config_file="c.ini")
        lib = ACBrLibNFe(options=options, wrapper=FakeWrapper(fake_native))
        created.append(lib)
        return lib

    yield factory
    for lib in created:
        lib.close()

@pytest.fixture
def nfe(make_nfe: Callable[..., ACBrLibNFe]) -> ACBrLibNFe:
    return make_nfe()
