import os
import uuid
from flask import Blueprint, current_app, g, jsonify, request, send_from_directory
from werkzeug.utils import secure_filename
from flows import catalog
from utils.auth import capability_required
from utils.errors import InvalidInput, register_error_handlers
from utils.params import json_body, parse_id
from utils.roles import LIST_SERVICES

services_bp = Blueprint('services', __name__)
uploads_bp = Blueprint('uploads', __name__)
register_error_handlers(services_bp, key="msg")

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif'}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def save_photo(file):
    """Store an uploaded photo and return its public path."""
    if not file or file.filename == '':
        return None
    if not allowed_file(file.filename):
        raise InvalidInput("Invalid file type")
    filename = f"{uuid.uuid4().hex}_{secure_filename(file.filename)}"
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    file.save(os.path.join(folder, filename))
    return f"/uploads/{filename}"


@services_bp.route('', methods=['GET'])
@services_bp.route('/', methods=['GET'])
def get_services():
    services = catalog.list_services(
        category=request.args.get('category'),
        vendor_id=parse_id(request.args.get('vendorId'), "vendor ID")
    )
    return jsonify([s.to_dict() for s in services])


@services_bp.route('/<int:service_id>', methods=['GET'])
def get_service(service_id):
    return jsonify(catalog.get_service(service_id).to_dict())


@services_bp.route('', methods=['POST'])
@services_bp.route('/', methods=['POST'])
@capability_required(LIST_SERVICES)
def create_service():
    if request.mimetype == 'multipart/form-data' or request.form:
        data = request.form
    else:
        data = json_body()

    photo = save_photo(request.files.get('photo'))
    try:
        service = catalog.create_service(
            vendor=g.current_user,
            organization_name=data.get('organizationName'),
            category=data.get('category'),
            price=data.get('price'),
            description=data.get('description'),
            availability=data.get('availability'),
            photo=photo
        )
    except Exception:
        if photo:
            os.remove(os.path.join(current_app.config['UPLOAD_FOLDER'], photo.rsplit('/', 1)[1]))
        raise
    return jsonify({"msg": "Service listing created successfully", "service": service.to_dict()}), 201


@uploads_bp.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
