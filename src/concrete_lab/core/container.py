from concrete_lab.services.data_service import DataService
from concrete_lab.services.concrete_test_service import ConcreteTestService
from concrete_lab.services.notification_service import NotificationService
from concrete_lab.services.report_service import ReportService

class ServiceContainer:
    """
    Service container.
    Builds every service on top of one shared DataService.
    """
    def __init__(self, data_service: DataService = None):
        # Persistence layer: JSON document, atomic writes
        self.data_service = data_service or DataService()

        # Sampling sheets, packs and measurements
        self.concrete_test_service = ConcreteTestService(self.data_service)

        # Operator task queue
        self.notification_service = NotificationService(self.data_service)

        # PV / RP reports
        self.report_service = ReportService(self.data_service)
