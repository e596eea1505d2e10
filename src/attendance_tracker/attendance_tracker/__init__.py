"""Attendance Tracker package.

School attendance record-keeping organized by feature modules (users, classes,
students, attendance, sessions, reports, devices) with a thin Flask controller
layer over service/repository layers, plus the client-side service layer.
"""
