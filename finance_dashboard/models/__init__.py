# finance_dashboard/models/__init__.py
from .user import User
from .account import Account, Transaction, Budget
from .expense import Expense
from .loan import Loan, LoanPayment
from .savings import SavingsJar
from .investment import Investment
from .portfolio import FixedDeposit, PPF, BondDetail, RealEstate, Gold
