"""
Services for schema-sentinel: WSDL model, SOAP/JSON validation, drift detection.
"""

from .drift_detector import DriftDetector, default_checks
from .report import build_report, exit_code, format_summary, write_report
from .schema_registry import SchemaRegistry, get_registry
from .soap_envelope import build_envelope
from .soap_validator import SoapBodyValidator
from .wsdl_model import WsdlModel, load_model, load_model_file
from .xml_tree import XmlNode, parse_xml
