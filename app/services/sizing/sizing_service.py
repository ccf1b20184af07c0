import logging
from typing import Dict, List

from app.schemas.network import (
    CalculationResult,
    CandidatePipe,
    GasKind,
    GasProperties,
    NetworkSizingInput,
    SegmentSizingInput,
    SegmentSizingResult,
    default_pipe_sizes,
)
from app.services.sizing.engine import (
    calculate_network as engine_calculate_network,
    calculate_segment as engine_calculate_segment,
    get_example_input as engine_get_example_input,
)
from app.services.sizing.gas_properties import GAS_PROPERTIES
from app.utils.error_handling import CalculationError

# Configure logging
logger = logging.getLogger(__name__)

class SizingService:
    """
    Service for handling network sizing calculations.
    This service wraps the sizing engine with logging and error translation.
    """

    def calculate_network(self, data: NetworkSizingInput) -> CalculationResult:
        """
        Size the header, drops and sub-drops of a distribution network.

        Args:
            data: Input data for network sizing

        Returns:
            Network sizing result

        Raises:
            CalculationError: If the calculation fails unexpectedly
        """
        logger.info(
            f"Sizing {data.system.gas_kind.value} network with {len(data.drops)} drops "
            f"and {sum(1 for p in data.candidate_pipes if p.selected)} candidate sizes"
        )
        try:
            result = engine_calculate_network(data)
        except Exception as e:
            logger.error(f"Error in network sizing: {str(e)}")
            raise CalculationError(
                "Network sizing failed",
                details={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        logger.info(
            f"Sizing completed: design demand={result.total_design_demand_scfm:.2f} SCFM, "
            f"capacity={result.capacity_status.value}"
        )
        return result

    def size_segment(self, data: SegmentSizingInput) -> SegmentSizingResult:
        """
        Size a single segment against its pressure drop budget.

        Args:
            data: Input data for segment sizing

        Returns:
            Segment sizing result

        Raises:
            CalculationError: If the calculation fails unexpectedly
        """
        logger.info(f"Sizing single segment at {data.flow_scfm:.2f} SCFM over {data.length:.1f} ft")
        try:
            result = engine_calculate_segment(data)
        except Exception as e:
            logger.error(f"Error in segment sizing: {str(e)}")
            raise CalculationError(
                "Segment sizing failed",
                details={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        logger.info(f"Segment sizing completed: recommended={result.recommended}")
        return result

    def get_default_pipe_sizes(self) -> List[CandidatePipe]:
        """
        Get the default Schedule 40 candidate list.
        """
        return default_pipe_sizes()

    def get_gas_properties(self) -> Dict[GasKind, GasProperties]:
        """
        Get the gas property table.
        """
        return dict(GAS_PROPERTIES)

    def get_example_input(self) -> NetworkSizingInput:
        """
        Get example input for network sizing.
        """
        return engine_get_example_input()

# Create a singleton instance
sizing_service = SizingService()
