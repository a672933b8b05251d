import logging

import pytest

from py_interceptcalc.config import PhysicsProfile, SolverConfig
from py_interceptcalc.interface import _EngineLoader
from py_interceptcalc.logger import logger

logger.setLevel(logging.DEBUG)


def pytest_addoption(parser):
    parser.addoption(
        "--engine",
        action="store",
        default=None,  # be sure to use the default value from _EngineLoader
        help="Specify the engine entry point name",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "engine: tests run against the engine selected with --engine")
    config.addinivalue_line("markers", "extended: branch coverage tests")


@pytest.fixture(scope="class")
def loaded_engine_instance(request):
    engine_name = request.config.getoption("--engine", None)
    logger.info(f"Attempting to load engine: '{engine_name}'")
    try:
        engine = _EngineLoader.load(engine_name)
        try:
            # probe:
            engine({})
        except Exception as e:
            raise Exception(f"Engine {engine} loaded but probe failed: {e}")
        print(f"Successfully loaded engine: {engine}")
        yield engine
    except Exception as e:
        pytest.exit(f"Cannot start tests:\nFailed to load engine via _EngineLoader: {e}", returncode=1)


@pytest.fixture(autouse=True)
def clean_defaults():
    PhysicsProfile.restore_defaults()
    SolverConfig.restore_defaults()
    yield
    PhysicsProfile.restore_defaults()
    SolverConfig.restore_defaults()
