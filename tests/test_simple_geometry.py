"""
简化几何模块的单元测试
"""

import numpy as np
import pytest

from particle_source import prepare_mesh_geometry
from particle_source.testing import (
    create_simple_box,
    create_simple_cylinder,
    create_simple_sphere,
)


def _outward(mesh, center):
    """法线是否全部朝外"""
    geometry = prepare_mesh_geometry(mesh)
    centroids = geometry.vertices.mean(axis=1)
    return np.all(np.einsum("ij,ij->i", geometry.normals, centroids - np.asarray(center)) > 0)


class TestSimpleBox:
    """测试简化盒子生成"""

    def test_box_creation(self):
        """测试基本盒子创建"""
        mesh = create_simple_box(center=(0, 0, 0), size=(1, 2, 3))
        assert mesh.shape == (12, 4, 3)  # 6 faces * 2 triangles

    def test_box_size(self):
        """测试盒子尺寸"""
        size = (2.0, 4.0, 6.0)
        mesh = create_simple_box(center=(1, 1, 1), size=size)
        vertices = mesh[:, 1:4, :].reshape(-1, 3)
        for i, s in enumerate(size):
            coord_range = np.max(vertices[:, i]) - np.min(vertices[:, i])
            assert abs(coord_range - s) < 1e-10

    def test_box_surface_area_and_normals(self):
        """测试盒子表面积和法线方向"""
        mesh = create_simple_box(size=(1.0, 2.0, 3.0))
        geometry = prepare_mesh_geometry(mesh)
        assert geometry.areas.sum() == pytest.approx(2 * (2 + 3 + 6))
        assert _outward(mesh, (0, 0, 0))


class TestSimpleCylinder:
    """测试简化圆柱生成"""

    def test_cylinder_mantle_radius(self):
        """测试侧面顶点半径"""
        n = 24
        mesh = create_simple_cylinder(radius=0.5, z_min=0.0, z_max=2.0, n_segments=n)
        assert len(mesh) == 4 * n
        mantle = mesh[:2 * n, 1:4, :].reshape(-1, 3)
        np.testing.assert_allclose(np.hypot(mantle[:, 0], mantle[:, 1]), 0.5)

    def test_cylinder_normals(self):
        """测试圆柱法线朝外"""
        assert _outward(create_simple_cylinder(1.0, -1.0, 1.0, 16), (0, 0, 0))

    def test_invalid_height(self):
        with pytest.raises(ValueError):
            create_simple_cylinder(z_min=1.0, z_max=1.0)


class TestSimpleSphere:
    """测试简化球体生成"""

    @pytest.mark.parametrize("subdivisions,n_faces", [(0, 20), (1, 80), (2, 320)])
    def test_sphere_face_count(self, subdivisions, n_faces):
        mesh = create_simple_sphere(subdivisions=subdivisions)
        assert len(mesh) == n_faces

    def test_sphere_radius(self):
        """测试球体半径"""
        center = (1.0, 2.0, 3.0)
        mesh = create_simple_sphere(center=center, radius=2.5, subdivisions=2)
        vertices = mesh[:, 1:4, :].reshape(-1, 3)
        np.testing.assert_allclose(np.linalg.norm(vertices - np.asarray(center), axis=1), 2.5)
        assert _outward(mesh, center)
