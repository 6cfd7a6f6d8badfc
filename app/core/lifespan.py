from contextlib import asynccontextmanager
import logging

from app.scoring.constants import get_scoring_constants
from app.taxonomy import get_default_taxonomy_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Load calibration and taxonomy once so a broken config fails at startup.
    constants = get_scoring_constants()
    get_default_taxonomy_provider()
    logger.info(
        "scoring_config_loaded algorithm_version=%s terminology_mappings=%s",
        constants.algorithm_version,
        len(constants.gaps.terminology_mappings),
    )
    yield
