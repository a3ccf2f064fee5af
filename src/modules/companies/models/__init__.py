from .company import Company
