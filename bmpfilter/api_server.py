#!/usr/bin/env python3
"""
BMP Filter API Server
Upload a 24-bit BMP, get back its grayscale or 3x3-convolved version.
"""

import logging
import re
from io import BytesIO
from pathlib import Path

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename

from . import config
from .exceptions import BmpError
from .models.kernel import Kernel, PRESETS, get_preset
from .models.operation import Operation, OperationKind
from .pipeline.process_image import process_bmp
from .services.image_service import ImageService

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = config.MAX_UPLOAD_MB * 1024 * 1024

# Initialize services
image_service = ImageService()


def parse_operation(form) -> Operation:
    """Build an Operation from the multipart form fields."""
    kind = (form.get('operation') or '').strip().lower()
    if kind == OperationKind.GRAYSCALE.value:
        return Operation.grayscale()
    if kind != OperationKind.CONVOLVE.value:
        raise ValueError(f"operation must be 'grayscale' or 'convolve', got '{kind}'")

    weights = (form.get('weights') or '').strip()
    if weights:
        return Operation.convolve(Kernel.from_values(t for t in re.split(r"[\s,;]+", weights) if t))
    return Operation.convolve(get_preset(form.get('kernel') or config.DEFAULT_KERNEL))


def output_filename(upload_name: str, operation: Operation) -> str:
    stem = Path(secure_filename(upload_name) or 'image.bmp').stem or 'image'
    suffix = config.GRAY_SUFFIX if operation.kind is OperationKind.GRAYSCALE else config.CONV_SUFFIX
    return f"{stem}{suffix}.bmp"


def create_app() -> Flask:
    app = Flask(__name__)
    CORS(app)  # Enable CORS for frontend communication
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

    @app.route('/api/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'message': 'BMP Filter API is running',
            'operations': [k.value for k in OperationKind],
        })

    @app.route('/api/kernels', methods=['GET'])
    def list_kernels():
        """Preset kernels usable as the 'kernel' form field."""
        return jsonify({
            'kernels': {
                name: {'weights': k.as_lists(), 'normalizer': k.normalizer}
                for name, k in PRESETS.items()
            }
        })

    @app.route('/api/process', methods=['POST'])
    def process():
        """Apply grayscale or a 3x3 convolution to an uploaded BMP."""
        if 'image' not in request.files:
            return jsonify({'success': False, 'message': 'No image provided'}), 400

        file = request.files['image']
        if file.filename == '':
            return jsonify({'success': False, 'message': 'No file selected'}), 400

        try:
            operation = parse_operation(request.form)
            result = process_bmp(file.read(), operation, image_service=image_service)
        except (BmpError, ValueError) as e:
            logger.error(f"Rejected upload {file.filename!r}: {e}")
            return jsonify({'success': False, 'message': str(e)}), 400
        except Exception as e:
            logger.error(f"Processing error: {e}")
            return jsonify({'success': False, 'message': 'Error processing image'}), 500

        logger.info(f"Processed {file.filename!r} with {operation.describe()} ({len(result)} bytes)")
        return send_file(
            BytesIO(result),
            mimetype='image/bmp',
            as_attachment=True,
            download_name=output_filename(file.filename, operation),
        )

    @app.errorhandler(413)
    def too_large(e):
        """Handle file too large error."""
        return jsonify({'success': False,
                        'message': f'File too large. Maximum size is {config.MAX_UPLOAD_MB}MB.'}), 413

    return app


app = create_app()


def main():
    config.configure_logging()
    print("🚀 Starting BMP Filter API Server...")
    print(f"🔧 Max upload size: {config.MAX_UPLOAD_MB}MB")
    print("📋 Endpoints:")
    print("   GET  /api/health")
    print("   GET  /api/kernels")
    print("   POST /api/process")
    print("="*60)
    app.run(host=config.HOST, port=config.PORT, debug=False)


if __name__ == '__main__':
    main()
