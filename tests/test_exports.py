"""Tests for the public package surface."""

import record_factory


class TestPackageExports:
    """Every name in __all__ is importable from the top-level package."""

    def test_version(self) -> None:
        assert record_factory.__version__ == "0.1.0"

    def test_all_names_resolve(self) -> None:
        for name in record_factory.__all__:
            assert hasattr(record_factory, name), name

    def test_core_names(self) -> None:
        for name in ("factory", "DatabasePersistable", "Persistable", "get_adapter", "analyze"):
            assert name in record_factory.__all__

    def test_error_hierarchy(self) -> None:
        assert issubclass(record_factory.AnalysisError, record_factory.RecordFactoryError)
        assert issubclass(record_factory.BuildError, record_factory.RecordFactoryError)
        assert issubclass(record_factory.ProfileNotFoundError, record_factory.RecordFactoryError)
