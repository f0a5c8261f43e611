from portal.schemas.property import Property, Cabin, KBArticle
from portal.schemas.user import UserRole, User, UserCreate, CreatedUserResponse, CabinConflictResponse
from portal.schemas.ticket import Ticket, TicketCreate, TicketUpdate, TicketStatus, TicketPriority, StaffTicketQueue
from portal.schemas.community import Thread, Reply, ThreadCreate, ReplyCreate, ThreadDetail
from portal.schemas.notice import Notice, Outage, NoticeCreate, OutageCreate, NoticeUpdate, OutageUpdate, OutageStatus
from portal.schemas.session import PortalSession
from portal.schemas.dashboard import DashboardView
