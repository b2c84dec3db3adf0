import logutil
from atlas import SHADE_TABLE, FACE_AXES
from faces import FaceId, BLOCK_TYPE_MASK, FACE_ID_SHIFT, FACE_ID_MASK


VERTEX_SOURCE = """
#version 330 core

uniform mat4 u_projection;
uniform mat4 u_view;
uniform mat4 u_model;

in vec3 position;
in uint packed_block;

out vec3 v_local_position;
flat out uint v_packed_block;
// Block layer of the provoking vertex. Top faces are flat in y, so this is
// floor(position.y) for every fragment on them without interpolation error.
flat out int v_block_y;

void main() {
    gl_Position = u_projection * u_view * u_model * vec4(position, 1.0);
    v_local_position = position;
    v_packed_block = packed_block;
    v_block_y = int(floor(position.y));
}
"""


FRAGMENT_TEMPLATE = """
#version 330 core

uniform sampler2D u_texture;
uniform uint u_texture_count;
uniform uint u_terrain_slice_y;

in vec3 v_local_position;
flat in uint v_packed_block;
flat in int v_block_y;

out vec4 out_color;

void main() {
    uint block_type = v_packed_block & %(block_mask)su;
    uint face_id = (v_packed_block >> %(face_shift)su) & %(face_mask)su;
    vec2 cell = vec2(float(block_type %% u_texture_count), float(block_type / u_texture_count));
    vec3 frac = fract(v_local_position);
    vec2 uv;
    float shade;
    switch (face_id) {
%(cases)s
    }
    uv /= float(u_texture_count);
    // pyglet uploads images bottom row first; atlas rows count from the top.
    out_color = (1.0 - shade) * texture(u_texture, vec2(uv.x, 1.0 - uv.y));
}
"""

_AXIS_NAMES = 'xyz'


def _face_case(face):
    u_axis, v_axis = FACE_AXES[face]
    swizzle = _AXIS_NAMES[u_axis] + _AXIS_NAMES[v_axis]
    # Unused ids 6 and 7 land on the default branch.
    label = 'default:' if face == FaceId.NEG_Z else f'case {int(face)}u:'
    lines = [f'        {label} // {face.name}']
    if face == FaceId.POS_Y:
        lines += [
            '            if (v_block_y == int(u_terrain_slice_y)) {',
            f'                uv = frac.{swizzle};',
            '            } else {',
            f'                uv = cell + frac.{swizzle};',
            '            }',
        ]
    else:
        lines.append(f'            uv = cell + frac.{swizzle};')
    lines += [
        f'            shade = {SHADE_TABLE[face]!r};',
        '            break;',
    ]
    return '\n'.join(lines)


def build_fragment_source():
    """ Render the fragment shader from the face tables in atlas.py. """
    return FRAGMENT_TEMPLATE % {
        'block_mask': hex(BLOCK_TYPE_MASK),
        'face_shift': FACE_ID_SHIFT,
        'face_mask': hex(FACE_ID_MASK),
        'cases': '\n'.join(_face_case(face) for face in FaceId),
    }


FRAGMENT_SOURCE = build_fragment_source()


def create_terrain_shader():
    """Create the shader program used for terrain rendering."""
    from pyglet.graphics.shader import Shader, ShaderProgram
    vertex_shader = Shader(VERTEX_SOURCE, "vertex")
    fragment_shader = Shader(FRAGMENT_SOURCE, "fragment")
    logutil.log("SHADER", "terrain shader compiled", level="DEBUG")
    return ShaderProgram(vertex_shader, fragment_shader)


def vertex_attributes(mesh):
    """ Attribute data for `program.vertex_list_indexed` from a terrain Mesh.

    Descriptors upload as unsigned ints so reserved high bits never disturb
    the block type and face bits.
    """
    return {
        'position': ('f', mesh.positions.astype('f4').ravel().tolist()),
        'packed_block': ('I', mesh.packed.astype('u4').tolist()),
    }


def set_atlas_uniforms(program, atlas_config):
    """ Bind the per-draw atlas settings on `program`. """
    program['u_texture_count'] = atlas_config.texture_count
    program['u_terrain_slice_y'] = atlas_config.terrain_slice_y
