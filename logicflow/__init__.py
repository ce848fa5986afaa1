from .analysis import AnalysisResult, analyze_logic, prove_logic, reanalyze
from .config import EngineSettings, NegationMode, RowOrder, TruthValueStyle
from .errors import LogicError, NestingTooDeep, ProofSearchError
from .evaluate import evaluate
from .parser import parse, parse_formula
from .tableau import ProofType, generate_report
from .tokens import extract_variables, tokenize
from .truthtable import Classification, build_truth_table, recalculate_row
from .kmap import generate_kmap
from .validate import validate

__version__ = "0.1.0"
