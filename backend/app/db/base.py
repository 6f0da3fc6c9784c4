from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.team_member import TeamMember  # noqa: F401
from backend.app.models.service import Service  # noqa: F401
from backend.app.models.package import Package  # noqa: F401
from backend.app.models.company_profile import CompanyProfile  # noqa: F401
from backend.app.models.payment_method import PaymentMethod  # noqa: F401
from backend.app.models.invoice_template import InvoiceTemplate  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
