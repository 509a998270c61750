"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

USER_CONTROLLER = """\
package com.example.api;

import org.springframework.web.bind.annotation.*;

@RestController
@RequestMapping("/api/users")
public class UserController {

    private final UserService service;

    /**
     * List all users
     */
    @GetMapping
    public List<UserDTO> listUsers() {
        return service.findAll();
    }

    // Create a user
    @PostMapping("/")
    public UserDTO createUser(@RequestBody @Valid CreateUserRequest request) {
        return service.create(request);
    }

    @Operation(summary = "Fetch one user")
    @GetMapping("/{id}")
    public ResponseEntity<UserDTO> getUser(@PathVariable Long id) {
        return ResponseEntity.ok(service.get(id));
    }

    @RequestMapping(value = "/{id}", method = RequestMethod.DELETE)
    public void deleteUser(@PathVariable("id") Long id) {
        service.delete(id);
    }
}
"""

USER_DTO = """\
package com.example.api;

import lombok.Data;

@Data
public class UserDTO {
    /** Unique identifier */
    @NotNull
    private Long id;

    @Schema(description = "Display name")
    @NotBlank
    private String name;

    private String email;

    private AddressDTO address;

    private List<RoleDTO> roles;

    private static final long serialVersionUID = 1L;
}
"""

ADDRESS_DTO = """\
@Data
public class AddressDTO {
    private String street;
    private String city;
}
"""

ROLE_DTO = """\
@Getter
public class RoleDTO {
    private String name;
    private UserDTO owner;
}
"""

CREATE_USER_REQUEST = """\
public class CreateUserRequest {
    @NotBlank
    private String name;
    private String email;
}
"""

USER_SERVICE = """\
@Service
public class UserService {
    private final UserRepository repository;
}
"""


@pytest.fixture
def java_project(tmp_path) -> Path:
    """A small Spring-style source tree with one controller and four DTOs."""
    root = tmp_path / "user-service"
    pkg = root / "src" / "main" / "java" / "com" / "example" / "api"
    pkg.mkdir(parents=True)
    (pkg / "UserController.java").write_text(USER_CONTROLLER)
    (pkg / "UserDTO.java").write_text(USER_DTO)
    (pkg / "AddressDTO.java").write_text(ADDRESS_DTO)
    (pkg / "RoleDTO.java").write_text(ROLE_DTO)
    (pkg / "CreateUserRequest.java").write_text(CREATE_USER_REQUEST)
    (pkg / "UserService.java").write_text(USER_SERVICE)

    generated = root / "build" / "generated"
    generated.mkdir(parents=True)
    (generated / "GhostDTO.java").write_text(
        "@Data\npublic class GhostDTO {\n    private String id;\n}\n"
    )
    return root


SNAPSHOT_V1 = """\
name: v1
endpoints:
  - path: /users
    method: GET
    className: UserController
    methodName: listUsers
    summary: List users
    responseType: List<UserDTO>
  - path: /users
    method: POST
    class_name: UserController
    method_name: createUser
    summary: Create user
    request_body_model: CreateUserRequest
    response_type: UserDTO
  - path: /legacy
    method: GET
    summary: Legacy
models:
  - name: UserDTO
    fields:
      - {name: id, type: Long, required: true}
      - {name: name, type: String, required: true}
      - {name: age, type: int}
  - name: CreateUserRequest
    fields:
      - {name: name, type: String, required: true}
  - name: LegacyDTO
    fields:
      - {name: code, type: String, required: true}
"""

SNAPSHOT_V2 = """\
name: v2
endpoints:
  - path: /users
    method: GET
    className: UserController
    methodName: listUsers
    summary: List all users
    responseType: List<UserDTO>
  - path: /users
    method: POST
    class_name: UserController
    method_name: createUser
    summary: Create user
    request_body_model: CreateUserRequest
    response_type: UserDTO
  - path: /users/{id}
    method: GET
    summary: Get user
    responseType: UserDTO
models:
  - name: UserDTO
    fields:
      - {name: id, type: Long, required: true}
      - {name: name, type: String, required: true}
      - {name: age, type: double}
      - {name: email, type: String, required: true}
  - name: CreateUserRequest
    fields:
      - {name: name, type: String, required: true}
"""


@pytest.fixture
def snapshot_files(tmp_path) -> tuple[Path, Path]:
    """Two snapshot files where v2 adds a required field and drops LegacyDTO."""
    v1 = tmp_path / "v1.yaml"
    v2 = tmp_path / "v2.yaml"
    v1.write_text(SNAPSHOT_V1)
    v2.write_text(SNAPSHOT_V2)
    return v1, v2
