"""
Flask web interface for Graph Codegen.

This provides a REST API the browser editor calls to list languages and node
kinds, validate a graph and generate code from it.
"""

import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from graph_codegen.code_generator import CodeGenerator
from graph_codegen.config import CodegenSettings, configure_logging, resolve_setting
from graph_codegen.exceptions import GraphFormatError
from graph_codegen.graph_validator import GraphValidator
from graph_codegen.models import Graph
from graph_codegen.sockets import create_socket, are_compatible

logger = logging.getLogger('graph_codegen.web')

app = Flask(__name__)
CORS(app)

# Global instances
settings = CodegenSettings.from_env()
generator = CodeGenerator(settings=settings)
validator = GraphValidator(generator.node_registry)


def _load_graph(data):
    """Read the ``graph`` member of a request body."""
    if not isinstance(data, dict) or 'graph' not in data:
        raise GraphFormatError("Request body must contain a 'graph' object")
    return Graph.from_dict(data['graph'], generator.node_registry)


@app.route('/api/languages', methods=['GET'])
def get_languages():
    """List the languages code can be generated in."""
    try:
        languages = [config.describe() for config in generator.language_registry]
        return jsonify({
            'success': True,
            'data': {
                'languages': languages,
                'default': generator.language_registry.default_language
            }
        })
    except Exception as e:
        logger.exception("Failed to list languages")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/nodes', methods=['GET'])
def get_node_catalog():
    """List the registered node kinds grouped by category."""
    try:
        categories = {
            category: [spec.describe() for spec in specs]
            for category, specs in generator.node_registry.by_category().items()
        }
        return jsonify({
            'success': True,
            'data': categories
        })
    except Exception as e:
        logger.exception("Failed to list node kinds")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/generate', methods=['POST'])
def generate():
    """Generate code for a graph."""
    try:
        data = request.get_json(silent=True)
        graph = _load_graph(data)
        result = generator.generate(graph, data.get('language'))
        return jsonify({
            'success': True,
            'data': result.to_dict()
        })
    except GraphFormatError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400
    except Exception as e:
        logger.exception("Code generation failed")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/validate', methods=['POST'])
def validate():
    """Report structural problems in a graph."""
    try:
        graph = _load_graph(request.get_json(silent=True))
        result = validator.validate_graph(graph)
        return jsonify({
            'success': True,
            'data': result.to_dict()
        })
    except GraphFormatError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400
    except Exception as e:
        logger.exception("Validation failed")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/sockets/compatible', methods=['POST'])
def sockets_compatible():
    """Check whether two sockets may be connected."""
    try:
        data = request.get_json(silent=True) or {}
        source = data.get('source') or {}
        target = data.get('target') or {}
        source_socket = create_socket('source', 'source', source.get('type', 'any'),
                                      source.get('direction', 'output'))
        target_socket = create_socket('target', 'target', target.get('type', 'any'),
                                      target.get('direction', 'input'))
        return jsonify({
            'success': True,
            'data': {'compatible': are_compatible(source_socket, target_socket)}
        })
    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400


if __name__ == '__main__':
    configure_logging(settings.log_level)
    host = resolve_setting('GRAPH_CODEGEN_HOST', '127.0.0.1')
    port = int(resolve_setting('GRAPH_CODEGEN_PORT', '5002'))
    logger.info("Starting Graph Codegen web interface on %s:%d", host, port)
    app.run(host=host, port=port)
