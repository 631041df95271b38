"""Business services."""
from plateset.services.file_service import FileService
from plateset.services.math_service import MathService
from plateset.services.serialization_service import SerializationService
from plateset.services.statistics_service import StatisticsService

__all__ = ["FileService", "MathService", "SerializationService", "StatisticsService"]
