from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_account, json_body, json_endpoint, make_guards
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required, _ = make_guards(container.auth_service.verify_token)
    devices = container.device_service

    @app.route("/api/instructor-devices/register", methods=["POST"], endpoint="devices_register")
    @json_endpoint
    @token_required
    def register_device():
        data = json_body()
        device = devices.register(current_account(), data.get("deviceId", ""), data.get("deviceName", ""))
        return jsonify(device.to_dict()), 201

    @app.route("/api/instructor-devices/location", methods=["PUT"], endpoint="devices_location_update")
    @json_endpoint
    @token_required
    def update_location():
        data = json_body()
        device = devices.update_location(
            current_account(),
            data.get("deviceId", ""),
            data.get("latitude"),
            data.get("longitude"),
            data.get("accuracy"),
        )
        return jsonify({"message": "Location updated successfully", "device": device.to_dict()})

    @app.route("/api/instructor-devices/devices", methods=["GET"], endpoint="devices_list")
    @json_endpoint
    @token_required
    def list_devices():
        return jsonify([d.to_dict() for d in devices.list_mine(current_account())])

    @app.route("/api/instructor-devices/device/<device_id>", methods=["DELETE"], endpoint="devices_remove")
    @json_endpoint
    @token_required
    def remove_device(device_id: str):
        devices.remove(current_account(), device_id)
        return jsonify({"message": "Device removed successfully"})

    @app.route(
        "/api/instructor-devices/location/<instructor_code>", methods=["GET"], endpoint="devices_instructor_location"
    )
    @json_endpoint
    @token_required
    def instructor_location(instructor_code: str):
        return jsonify(devices.instructor_location(instructor_code).to_dict())
