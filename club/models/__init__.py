# Computer Club — Domain Models
# Import all value types here so services can import from one place

from club.models.working_hours import ClubConfig, WorkingHours                    # noqa
from club.models.client import ArriveClient, ClientPayload, LeaveClient, SitClient, WaitClient  # noqa
from club.models.event import EventKind, InputEvent, OutputEvent, OutputKind     # noqa
from club.models.revenue import RevenueStats, accrue                              # noqa
