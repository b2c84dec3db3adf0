import math

import numpy as np

import config

# Pitch stops just short of straight up/down so the view never flips.
PITCH_LIMIT = 1.54


class FlyCamera(object):
    """ Free-flying camera driven by mouse look and WASD.

    `yaw` and `pitch` are in radians. With both at zero the camera looks
    down -z; positive yaw turns left, positive pitch looks up.
    """

    def __init__(self, position=(0.0, 0.0, 0.0), yaw=0.0, pitch=0.0,
                 sensitivity=None, speed=None, shift_multiplier=None):
        self.position = np.array(position, dtype=np.float64)
        self.yaw = float(yaw)
        self.pitch = max(-PITCH_LIMIT, min(float(pitch), PITCH_LIMIT))
        self.sensitivity = sensitivity if sensitivity is not None else getattr(config, 'CAMERA_SENSITIVITY', 0.00012)
        self.speed = speed if speed is not None else getattr(config, 'CAMERA_SPEED', 20.0)
        self.shift_multiplier = shift_multiplier if shift_multiplier is not None else getattr(config, 'CAMERA_SHIFT_MULTIPLIER', 2.0)

    @classmethod
    def looking_at(cls, position, target, **kwargs):
        """ Camera at `position` facing `target`. """
        position = np.array(position, dtype=np.float64)
        direction = np.array(target, dtype=np.float64) - position
        direction /= np.linalg.norm(direction)
        pitch = math.asin(max(-1.0, min(direction[1], 1.0)))
        yaw = math.atan2(-direction[0], -direction[2])
        return cls(position, yaw, pitch, **kwargs)

    def forward(self):
        """ Unit line of sight vector. """
        cp = math.cos(self.pitch)
        return np.array([-math.sin(self.yaw) * cp,
                         math.sin(self.pitch),
                         -math.cos(self.yaw) * cp])

    def right(self):
        """ Horizontal strafe direction; shrinks with cos(pitch). """
        back = -self.forward()
        return np.array([back[2], 0.0, -back[0]])

    def target(self):
        return self.position + self.forward()

    def look(self, dx, dy, window_scale):
        """ Rotate by a mouse motion of (dx, dy) pixels, y up.

        Motion is scaled by the smaller window dimension so the feel does
        not change with window size.
        """
        self.yaw -= math.radians(self.sensitivity * dx * window_scale)
        pitch = self.pitch + math.radians(self.sensitivity * dy * window_scale)
        self.pitch = max(-PITCH_LIMIT, min(pitch, PITCH_LIMIT))

    def move(self, dt, forward=0, strafe=0, fast=False):
        """ Translate for `dt` seconds.

        Parameters
        ----------
        forward : int
            +1 for W, -1 for S.
        strafe : int
            +1 for D, -1 for A.
        fast : bool
            Shift held; multiplies the speed.

        """
        delta = forward * self.forward() + strafe * self.right()
        length = np.linalg.norm(delta)
        if length < 1e-9:
            return self.position
        speed = self.speed * (self.shift_multiplier if fast else 1.0)
        self.position = self.position + delta / length * dt * speed
        return self.position
