from bill_analyzer.analysis.analyzer import BillAnalyzer
from bill_analyzer.analysis.base import BaseBillAnalyzer
from bill_analyzer.analysis.retry import RetryExecutor, RetryPolicy

__all__ = ["BaseBillAnalyzer", "BillAnalyzer", "RetryExecutor", "RetryPolicy"]
