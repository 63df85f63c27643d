from qrlinks.utils import initialize_logging


initialize_logging()
