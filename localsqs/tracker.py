from logging import getLogger
from typing import Callable, List, Tuple

from typeguard import typechecked

from localsqs.__version__ import __application_name__

log = getLogger(__application_name__)


class ResourceTracker:
    """
    Remembers created resources (e.g. queue URLs), in creation order, so they can be cleaned up at the end of a test.
    Not thread safe - serialize access if creating resources concurrently.
    """

    def __init__(self):
        self._resource_ids = []  # type: List[str]

    @typechecked()
    def track(self, resource_id: str):
        self._resource_ids.append(resource_id)

    @typechecked()
    def untrack(self, resource_id: str) -> bool:
        """
        Stop tracking a resource (e.g. because it has been deleted).

        :param resource_id: resource ID
        :return: True if it was being tracked
        """
        try:
            self._resource_ids.remove(resource_id)
            was_tracked = True
        except ValueError:
            was_tracked = False
        return was_tracked

    @property
    def tracked(self) -> Tuple[str, ...]:
        return tuple(self._resource_ids)

    def __len__(self) -> int:
        return len(self._resource_ids)

    def __contains__(self, resource_id) -> bool:
        return resource_id in self._resource_ids

    @typechecked()
    def drain_all(self, deleter: Callable[[str], object]) -> List[str]:
        """
        Best-effort sweep: try to delete every tracked resource. A failure on one doesn't stop the rest, and nothing is raised.
        Afterwards nothing is tracked.

        :param deleter: deletes one resource given its ID
        :return: IDs that could not be deleted (abandoned)
        """
        resource_ids = self._resource_ids
        self._resource_ids = []
        abandoned = []
        for resource_id in resource_ids:
            try:
                deleter(resource_id)
            except Exception as e:
                log.warning(f"could not delete {resource_id} : {e}")
                abandoned.append(resource_id)
        if len(abandoned) > 0:
            log.info(f"{len(abandoned)} of {len(resource_ids)} resources abandoned")
        return abandoned
